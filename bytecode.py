INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def wrap32(value: int) -> int:
    # two's complement wraparound into the signed 32-bit range
    return (value - INT_MIN) % (2 ** 32) + INT_MIN


class StackValue:
    pass


class Number(StackValue):
    def __init__(self, value: int):
        if value < INT_MIN or value > INT_MAX:
            raise ValueError(f"number out of 32-bit range: {value}")
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Number) and other.value == self.value

    def __hash__(self):
        return hash(("Number", self.value))

    def __repr__(self):
        return f"Number({self.value})"

    def __str__(self):
        return str(self.value)


class Location:
    """Opaque per-instruction token handed to the control-point hook."""

    def __init__(self, pc: int, line: int | None = None):
        self.pc = pc
        self.line = line

    def __eq__(self, other):
        return isinstance(other, Location) and (other.pc, other.line) == (self.pc, self.line)

    def __hash__(self):
        return hash((self.pc, self.line))

    def __repr__(self):
        return f"Location(pc={self.pc}, line={self.line})"


class Instr:
    opcode = None

    def operands(self):
        return ()

    def to_source(self) -> str:
        parts = [self.opcode.lower()] + [str(x) for x in self.operands()]
        return " ".join(parts)

    def __eq__(self, other):
        return type(other) is type(self) and other.operands() == self.operands()

    def __hash__(self):
        return hash((self.opcode, self.operands()))

    def __repr__(self):
        args = ", ".join(repr(x) for x in self.operands())
        return f"{type(self).__name__}({args})"


class Push(Instr):
    opcode = "PUSH"

    def __init__(self, value):
        if not isinstance(value, StackValue):
            value = Number(value)
        self.value = value

    def operands(self):
        return (self.value,)


class Pop(Instr):
    opcode = "POP"


class Add(Instr):
    opcode = "ADD"


class Sub(Instr):
    opcode = "SUB"


class Dup(Instr):
    opcode = "DUP"


class Print(Instr):
    opcode = "PRINT"


class JumpIfEqual(Instr):
    opcode = "JE"

    def __init__(self, comparand: int, label: str):
        self.comparand = comparand  # jump to label if top of stack == comparand
        self.label = label

    def operands(self):
        return (self.comparand, self.label)


class JumpIfNotEqual(JumpIfEqual):
    opcode = "JNE"


class Program:
    def __init__(self):
        self.instructions = []   # list of Instr
        self.locations = []      # list of Location aligned with instructions
        self.labels = {}         # label name -> address of the next emitted instruction

    def __len__(self):
        return len(self.instructions)

    def emit(self, instr, line=None):
        # returns instruction address
        pc = len(self.instructions)
        self.instructions.append(instr)
        self.locations.append(Location(pc, line))
        return pc

    def add_label(self, name: str) -> bool:
        # False when the name is already bound
        if name in self.labels:
            return False
        self.labels[name] = len(self.instructions)
        return True

    def fetch(self, pc: int):
        if pc < 0 or pc >= len(self.instructions):
            return None
        return self.instructions[pc], self.locations[pc]

    def listing(self):
        lines = []
        by_addr = {}
        for name, addr in self.labels.items():
            by_addr.setdefault(addr, []).append(name)
        for pc, instr in enumerate(self.instructions):
            for name in by_addr.get(pc, []):
                lines.append(f"{name}:")
            lines.append(f"  {pc:04d}  {instr.to_source()}")
        for name in by_addr.get(len(self.instructions), []):
            lines.append(f"{name}:")
        return lines
