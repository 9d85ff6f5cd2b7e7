import sys

from bytecode import Number, wrap32
from errors import VMRuntimeError
from tracer import NullTracer


class OperandStack:
    def __init__(self):
        self.items = []

    def __len__(self):
        return len(self.items)

    def push(self, value):
        self.items.append(value)

    def pop(self):
        if not self.items:
            raise VMRuntimeError("stack underflow")
        return self.items.pop()

    def pop_number(self) -> int:
        value = self.pop()
        if not isinstance(value, Number):
            raise VMRuntimeError(f"expected a number, got {type(value).__name__}")
        return value.value


class VM:
    def __init__(self, program, tracer=None, out=None):
        self.program = program
        self.labels = program.labels
        self.tracer = tracer if tracer is not None else NullTracer()
        self.out = out if out is not None else sys.stdout

        self.pc = 0                  # program counter
        self.stack = OperandStack()  # operand stack
        self.steps = 0               # instructions executed so far
        self.finished = False

    def write(self, text: str):
        print(text, file=self.out)

    def jump(self, label: str):
        addr = self.labels.get(label)
        if addr is None:
            raise VMRuntimeError(f"undefined label: {label}")
        self.pc = addr

    def step(self) -> bool:
        # returns True once pc has run past the last instruction
        fetched = self.program.fetch(self.pc)
        if fetched is None:
            return True
        instr, loc = fetched

        self.tracer.control_point(loc)
        self.steps += 1
        opcode = instr.opcode

        if opcode == "PUSH":
            self.stack.push(instr.value)
            self.pc += 1
            return False

        if opcode == "POP":
            self.stack.pop()
            self.pc += 1
            return False

        if opcode == "DUP":
            val = self.stack.pop()
            self.stack.push(val)
            self.stack.push(val)
            self.pc += 1
            return False

        if opcode in ("ADD", "SUB"):
            a = self.stack.pop_number()
            b = self.stack.pop_number()
            if opcode == "ADD":
                self.stack.push(Number(wrap32(a + b)))
            else:
                # the value pushed first is the minuend
                self.stack.push(Number(wrap32(b - a)))
            self.pc += 1
            return False

        if opcode == "PRINT":
            self.write(str(self.stack.pop_number()))
            self.pc += 1
            return False

        if opcode in ("JE", "JNE"):
            val = self.stack.pop_number()
            taken = val == instr.comparand
            if opcode == "JNE":
                taken = not taken
            if taken:
                self.jump(instr.label)
            else:
                self.pc += 1
            return False

        raise VMRuntimeError(f"Unknown opcode: {opcode}")

    def run(self):
        if self.finished:
            raise VMRuntimeError("interpreter already finished")
        try:
            while True:
                halted = self.step()
                if halted:
                    break
        except VMRuntimeError as e:
            if e.pc is None:
                e.pc = self.pc
                fetched = self.program.fetch(self.pc)
                if fetched is not None:
                    e.line = fetched[1].line
            raise
        finally:
            self.finished = True


def run_program(program, tracer=None, out=None):
    vm = VM(program, tracer=tracer, out=out)
    vm.run()
    return vm
