OTP_LENGTH = 6


class OtpInput:
    """Six single-digit cells with a focus cursor, like the OTP entry view."""

    def __init__(self, length: int = OTP_LENGTH):
        self.length = length
        self.cells = [""] * length
        self.focus = 0

    @property
    def code(self) -> str:
        return "".join(self.cells)

    @property
    def complete(self) -> bool:
        return all(self.cells)

    def clear(self) -> None:
        self.cells = [""] * self.length
        self.focus = 0

    def _move(self, index: int) -> None:
        self.focus = max(0, min(index, self.length - 1))

    def type_digit(self, char: str, index: int | None = None) -> None:
        index = self.focus if index is None else index
        if len(char) != 1 or not char.isdigit():
            return
        self.cells[index] = char
        self._move(index + 1)

    def backspace(self, index: int | None = None) -> None:
        index = self.focus if index is None else index
        if self.cells[index]:
            self.cells[index] = ""
            self._move(index)
        elif index > 0:
            self.cells[index - 1] = ""
            self._move(index - 1)

    def left(self) -> None:
        self._move(self.focus - 1)

    def right(self) -> None:
        self._move(self.focus + 1)

    def paste(self, text: str) -> None:
        digits = [ch for ch in text if ch.isdigit()][: self.length]
        if not digits:
            return
        self.cells = digits + [""] * (self.length - len(digits))
        self._move(len(digits))
