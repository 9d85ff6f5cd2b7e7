import sys


class NullTracer:
    """Control-point hook that does nothing; the VM's default."""

    def control_point(self, location):
        pass


class PrintTracer:
    def __init__(self, program, stream=None):
        self.program = program
        self.stream = stream

    def control_point(self, location):
        instr = self.program.instructions[location.pc]
        line = "?" if location.line is None else location.line
        print(f"TRACE pc={location.pc:04d} line={line} {instr.to_source()}", file=self.stream or sys.stderr)


class CountingTracer:
    """Counts how often each control point is reached.

    Locations reached at least ``threshold`` times are reported as hot,
    which is where a tracing JIT would start recording.
    """

    def __init__(self, threshold: int = 50):
        self.threshold = threshold
        self.counts = {}
        self.steps = 0

    def control_point(self, location):
        self.counts[location] = self.counts.get(location, 0) + 1
        self.steps += 1

    def hot(self):
        return [loc for loc, n in self.counts.items() if n >= self.threshold]

    def report(self, program=None) -> str:
        lines = [f"PROFILE {self.steps} steps, {len(self.counts)} control points"]
        hot = set(self.hot())
        ranked = sorted(self.counts.items(), key=lambda kv: (-kv[1], kv[0].pc))
        for loc, n in ranked:
            text = ""
            if program is not None:
                text = "  " + program.instructions[loc.pc].to_source()
            mark = " *hot*" if loc in hot else ""
            lines.append(f"  pc={loc.pc:04d} line={loc.line}  hits={n}{mark}{text}")
        return "\n".join(lines)
