#!/usr/bin/env python3
"""LMC-VM Command Line Interface.

Run Little Man Computer programs.

Usage:
    python main.py --program programs/add.lmc --input 5 3
    python main.py --sample countdown --word int32 --trace
    python main.py --sample add --memory 90 99
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from lmc_vm import LMC, SAMPLES, get_sample, prompt_input
from lmc_vm.loader import load_program_file, parse_values
from lmc_vm.word import WORD_POLICIES


def print_state(cpu: LMC) -> None:
    """Print registers, I/O and non-zero mailboxes."""
    summary = cpu.get_summary()
    print(f"Accumulator: {summary['accumulator']}")
    print(f"Program Counter: {summary['pc']}")
    print(f"Halted: {summary['halted']}")
    if summary["fault"]:
        print(f"Fault: {summary['fault']}")
    if summary["output"]:
        print(f"Output: {summary['output']}")
    if summary["pending_inputs"]:
        print(f"Input Queue: {summary['pending_inputs']}")
    print("Memory (non-zero locations):")
    for address, value in summary["memory"].items():
        print(f"  [{address:02d}]: {value:>5}  {cpu.decoder.disassemble(value)}")


def print_memory(cpu: LMC, start: int = 0, end: int = 99) -> None:
    """Print mailboxes start..end inclusive, ten per row."""
    for row in range(start - start % 10, end + 1, 10):
        cells = []
        for address in range(row, row + 10):
            if start <= address <= end:
                cells.append(f"{cpu.get_memory(address):>5}")
            else:
                cells.append(" " * 5)
        print(f"{row:02d}:" + "".join(cells).rstrip())


def step_through(cpu: LMC) -> None:
    """Execute one instruction per Enter press until 'q', HLT or a fault."""
    print("Step-by-step execution (press Enter for next step, 'q' to quit)")
    while not cpu.state.is_stopped:
        entry = cpu.step()
        if entry.instruction is not None:
            print(f"PC: {entry.address:02d}, Instruction: {entry.instruction:03d}"
                  f" ({cpu.decoder.disassemble(entry.instruction)}), ACC: {cpu.get_accumulator()}")
        if entry.error:
            print(f"  {entry.error}")
        if cpu.state.is_stopped:
            break
        try:
            reply = input("Press Enter to continue or 'q' to quit: ")
        except EOFError:
            print()
            break
        if reply.strip().lower() == "q":
            break


def main():
    parser = argparse.ArgumentParser(
        description="LMC-VM: Little Man Computer virtual machine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run a program file with queued inputs
    python main.py --program programs/add.lmc --input 5 3

    # Run a sample program on a 32-bit word with full trace output
    python main.py --sample countdown --word int32 --trace

    # Run inline cell values, prompting when the input queue runs dry
    python main.py --inline "901,390,901,190,902,0" --prompt

    # Step through a sample one instruction at a time
    python main.py --sample step --step
        """
    )

    parser.add_argument(
        "--program", "-p",
        type=str,
        help="Path to program file (one instruction per line)"
    )
    parser.add_argument(
        "--inline", "-i",
        type=str,
        help="Inline cell values (separated by commas, semicolons or spaces)"
    )
    parser.add_argument(
        "--sample", "-s",
        choices=sorted(SAMPLES),
        help="Run a built-in sample program"
    )
    parser.add_argument(
        "--list-samples",
        action="store_true",
        help="List built-in sample programs and exit"
    )
    parser.add_argument(
        "--word", "-w",
        choices=sorted(WORD_POLICIES),
        default=None,
        help="Word policy. Default: the sample's word, else decimal"
    )
    parser.add_argument(
        "--input", "-n",
        type=int,
        nargs="+",
        help="Values queued for INP (replaces a sample's own inputs)"
    )
    parser.add_argument(
        "--prompt",
        action="store_true",
        help="Ask on the terminal when INP finds the input queue empty"
    )
    parser.add_argument(
        "--max-cycles",
        type=int,
        default=10000,
        help="Maximum execution cycles (0 for no limit). Default: 10000"
    )
    parser.add_argument(
        "--step",
        action="store_true",
        help="Execute one instruction per Enter press"
    )
    parser.add_argument(
        "--trace", "-t",
        action="store_true",
        help="Print full execution trace"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output (output values only)"
    )
    parser.add_argument(
        "--memory", "-m",
        type=int,
        nargs=2,
        metavar=("START", "END"),
        help="Print mailboxes START..END (0-99) after the run"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every executed instruction"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    if args.list_samples:
        for name, sample in SAMPLES.items():
            print(f"{name:16} [{sample.word}] {sample.description}")
        return 0

    # Validate arguments
    sources = [s for s in (args.program, args.inline, args.sample) if s]
    if len(sources) != 1:
        parser.error("Exactly one of --program, --inline or --sample is required")
    if args.memory and not 0 <= args.memory[0] <= args.memory[1] <= 99:
        parser.error("--memory needs 0 <= START <= END <= 99")

    sample = get_sample(args.sample) if args.sample else None
    word = args.word or (sample.word if sample else "decimal")

    # Initialize machine
    cpu = LMC(
        word=word,
        input_provider=prompt_input() if args.prompt else None,
        max_cycles=args.max_cycles or None
    )

    # Load program
    if sample is not None:
        sample.load_into(cpu, inputs=args.input)
        if not args.quiet:
            print(f"Loading sample: {sample.name} - {sample.description}")
    else:
        if args.program:
            program_path = Path(args.program)
            if not program_path.exists():
                print(f"Error: Program file not found: {args.program}")
                return 1
            program = load_program_file(program_path)
            if not args.quiet:
                print(f"Loaded {len(program)} instructions from {args.program}")
        else:
            try:
                program = parse_values(args.inline)
            except ValueError as e:
                parser.error(str(e))
        cpu.load_program(program)
        if args.input:
            cpu.add_inputs(args.input)

    # Run
    if not args.quiet:
        print(f"Word: {cpu.word}")
        print("-" * 60)

    if args.step:
        step_through(cpu)
    else:
        try:
            cpu.run()
        except RuntimeError as e:
            print(f"Execution error: {e}")

    # Output
    if args.trace:
        cpu.print_trace()
    elif not args.quiet:
        print()
        print(f"Cycles: {cpu.get_cycle_count()}")
        print_state(cpu)
        errors = cpu.get_summary()["errors"]
        if errors:
            print(f"Errors: {errors}")
    else:
        for value in cpu.get_output():
            print(value)

    if args.memory:
        if not args.quiet:
            print(f"Memory {args.memory[0]:02d}-{args.memory[1]:02d}:")
        print_memory(cpu, *args.memory)

    # Return exit code based on halted state
    return 0 if cpu.is_halted() else 1


if __name__ == "__main__":
    sys.exit(main())
