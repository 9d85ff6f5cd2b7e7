class InterpError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def location(self) -> str:
        return ""

    def format(self) -> str:
        loc = self.location()
        if loc:
            return f"FATAL: {self.message} ({loc})"
        return f"FATAL: {self.message}"

    def __str__(self) -> str:
        return self.format()


class LoadError(InterpError):
    def __init__(self, message: str, line: int | None = None, text: str | None = None):
        super().__init__(message)
        self.line = line
        self.text = text

    def location(self) -> str:
        if self.line is None:
            return ""
        if self.text is None:
            return f"line {self.line}"
        return f"line {self.line}: {self.text!r}"


class VMRuntimeError(InterpError):
    def __init__(self, message: str, pc: int | None = None, line: int | None = None):
        super().__init__(message)
        self.pc = pc
        self.line = line

    def location(self) -> str:
        parts = []
        if self.pc is not None:
            parts.append(f"pc={self.pc:04d}")
        if self.line is not None:
            parts.append(f"line {self.line}")
        return ", ".join(parts)
