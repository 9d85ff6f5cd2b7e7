import re

from bytecode import (
    INT_MAX, INT_MIN, Program,
    Push, Pop, Add, Sub, Dup, Print, JumpIfEqual, JumpIfNotEqual,
)
from errors import LoadError


NUMBER_RE = re.compile(r"[+-]?[0-9]+")

# opcodes without operands
SIMPLE_OPCODES = {
    "add": Add,
    "sub": Sub,
    "print": Print,
    "pop": Pop,
    "dup": Dup,
}

JUMP_OPCODES = {
    "je": JumpIfEqual,
    "jne": JumpIfNotEqual,
}


class Label:
    def __init__(self, name):
        self.name = name


class Loader:
    """Turns program text into a Program, one line at a time.

    Each line is either a label directive (``name:``) or a single
    instruction. Tokens are separated by single spaces, so repeated
    spaces produce empty tokens. Jump targets are kept as names and
    only looked up when the jump is taken.
    """

    def __init__(self):
        self.program = Program()
        self.line_no = 0
        self.line_text = None
        self.tokens = iter(())

    def error(self, message):
        raise LoadError(message, line=self.line_no, text=self.line_text)

    # move to the next operand, failing if the line has run out
    def next_operand(self) -> str:
        tok = next(self.tokens, None)
        if tok is None:
            self.error("parse error: too few arguments")
        return tok.strip()

    def parse_number(self, s: str) -> int:
        if not NUMBER_RE.fullmatch(s):
            self.error("parse error: unparsed number")
        num = int(s)
        if num < INT_MIN or num > INT_MAX:
            self.error("parse error: unparsed number")
        return num

    def parse_line(self, line: str):
        line = line.strip()
        self.line_text = line
        self.tokens = iter(line.split(" "))

        opcode = self.next_operand()
        if opcode in SIMPLE_OPCODES:
            rv = SIMPLE_OPCODES[opcode]()
        elif opcode in JUMP_OPCODES:
            cmp_val = self.parse_number(self.next_operand())
            target = self.next_operand()
            rv = JUMP_OPCODES[opcode](cmp_val, target)
        elif opcode == "push":
            rv = Push(self.parse_number(self.next_operand()))
        elif opcode.endswith(":"):
            rv = Label(opcode[:-1])
        else:
            self.error("parse error: unknown opcode")

        if next(self.tokens, None) is not None:
            self.error("parse error: too many operands")
        return rv

    def feed(self, line: str):
        self.line_no += 1
        parsed = self.parse_line(line)
        if isinstance(parsed, Label):
            if not self.program.add_label(parsed.name):
                self.error("parse error: duplicate label")
        else:
            self.program.emit(parsed, line=self.line_no)

    def load(self, lines) -> Program:
        for line in lines:
            self.feed(line.rstrip("\r\n"))
        return self.program


def load_lines(lines) -> Program:
    return Loader().load(lines)


def load_source(text: str) -> Program:
    lines = text.split("\n")
    # a final newline terminates the last line, it does not start a new one
    if lines[-1] == "":
        lines.pop()
    return load_lines(lines)


def load_file(path: str) -> Program:
    try:
        # only "\n" ends a line; a lone "\r" stays part of it
        with open(path, "r", encoding="utf-8", newline="\n") as f:
            return load_lines(f)
    except OSError:
        raise LoadError(f"Failed to open input file: {path}")
    except UnicodeDecodeError:
        raise LoadError(f"Failed to read input file: {path}")
