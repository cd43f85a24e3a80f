"""
Code Buffer
===========
Fixed-length digit buffer with keystroke, paste and backspace semantics.

Every mutation returns the slot that should receive focus next, so focus is
always derived from the buffer rather than tracked per input widget.
"""

import re
from typing import List, Optional, Tuple

CODE_LENGTH = 6

_NON_DIGIT = re.compile(r"[^0-9]")


def extract_digits(raw_text: Optional[str]) -> str:
    """Strip every non-digit character from raw input."""
    if not raw_text:
        return ""
    return _NON_DIGIT.sub("", raw_text)


class CodeBuffer:
    """
    Ordered slots holding one digit each, or ``''`` when empty.

    Example:
        buffer = CodeBuffer()
        focus = buffer.input(0, "123456")  # paste
        assert buffer.code == "123456" and focus == 5
    """

    def __init__(self, length: int = CODE_LENGTH):
        if length < 1:
            raise ValueError("Code length must be positive")
        self.length = length
        self._slots: List[str] = [""] * length

    @property
    def slots(self) -> Tuple[str, ...]:
        return tuple(self._slots)

    @property
    def code(self) -> str:
        return "".join(self._slots)

    @property
    def last_index(self) -> int:
        return self.length - 1

    @property
    def filled_count(self) -> int:
        return sum(1 for slot in self._slots if slot)

    def is_complete(self) -> bool:
        return all(self._slots)

    def first_empty(self) -> Optional[int]:
        for index, slot in enumerate(self._slots):
            if not slot:
                return index
        return None

    def _check_index(self, slot_index: int) -> None:
        if not 0 <= slot_index < self.length:
            raise IndexError(f"Slot {slot_index} out of range [0, {self.length})")

    def input(self, slot_index: int, raw_text: Optional[str], focus: Optional[int] = None) -> int:
        """
        Apply text typed or pasted into ``slot_index``.

        Args:
            slot_index: Slot that received the text
            raw_text: Raw text from the input widget
            focus: Current focus, returned unchanged when nothing is written

        Returns:
            Index of the slot that should receive focus next
        """
        self._check_index(slot_index)
        digits = extract_digits(raw_text)

        if not digits:
            return slot_index if focus is None else focus

        if len(digits) == 1:
            self._slots[slot_index] = digits
            return min(slot_index + 1, self.last_index)

        # Paste: fill consecutive slots, drop anything past the last one
        written = min(len(digits), self.length - slot_index)
        for offset in range(written):
            self._slots[slot_index + offset] = digits[offset]

        target = min(slot_index + written, self.last_index)
        while target < self.last_index and self._slots[target]:
            target += 1
        return target

    def backspace(self, slot_index: int) -> int:
        """Clear ``slot_index`` and return the slot to focus."""
        self._check_index(slot_index)
        self._slots[slot_index] = ""
        return slot_index - 1 if slot_index > 0 else 0

    def clear(self) -> int:
        self._slots = [""] * self.length
        return 0

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        masked = "".join("*" if slot else "_" for slot in self._slots)
        return f"CodeBuffer({masked})"
