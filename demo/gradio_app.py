"""LMC-VM Interactive Demo.

A Gradio web interface for running and visualizing Little Man Computer
programs.

Usage:
    cd /path/to/lmc-vm
    python demo/gradio_app.py

Features:
    - Write a program or load a sample
    - Choose the word policy (decimal, int32, int64)
    - Queue input values
    - See the step-by-step execution trace and final mailboxes
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import gradio as gr
from lmc_vm import LMC, SAMPLES
from lmc_vm.loader import parse_program, parse_values


TRACE_LIMIT = 200


# =============================================================================
# Example Programs
# =============================================================================

def sample_source(name: str) -> str:
    """Render a sample as program-file text (data mailboxes padded with 0)."""
    sample = SAMPLES[name]
    cells = list(sample.program)
    if sample.data:
        last = max(sample.data)
        cells.extend([0] * (last + 1 - len(cells)))
        for address, value in sample.data.items():
            cells[address] = value
    lines = [f"// {sample.description}"]
    lines.extend(str(value) for value in cells)
    return "\n".join(lines)


# =============================================================================
# Execution Functions
# =============================================================================

def run_program(program: str, inputs: str, word: str, max_cycles: int) -> tuple:
    """Execute a program and return results.

    Args:
        program: Program text, one instruction per line
        inputs: Input values separated by commas or spaces
        word: Word policy name
        max_cycles: Maximum execution cycles

    Returns:
        Tuple of (summary_text, trace_text, memory_text)
    """
    cells = parse_program(program)
    if not cells:
        return "Error: No program provided", "", ""

    try:
        input_values = parse_values(inputs) if inputs.strip() else []
    except ValueError as e:
        return f"Error: {e}", "", ""

    cpu = LMC(word=word, max_cycles=int(max_cycles))
    cpu.load_program(cells)
    cpu.add_inputs(input_values)

    try:
        trace = cpu.run()
    except RuntimeError as e:
        error_msg = str(e)
        trace = cpu.get_trace()
    else:
        error_msg = None

    # Format summary
    summary = cpu.get_summary()
    summary_lines = [
        "EXECUTION SUMMARY",
        "=" * 40,
        f"Word: {cpu.word}",
        f"Cycles: {summary['cycles']}",
        f"Halted: {'Yes' if summary['halted'] else 'No'}",
        f"Accumulator: {summary['accumulator']}",
        f"Output: {summary['output']}",
    ]
    if summary["fault"]:
        summary_lines.append(f"Fault: {summary['fault']}")
    if error_msg:
        summary_lines.append(f"\nRuntime: {error_msg}")
    if summary["errors"]:
        summary_lines.append("\nDiagnostics:")
        for err in summary["errors"][:5]:
            summary_lines.append(f"  - {err}")

    summary_text = "\n".join(summary_lines)

    # Format trace
    trace_lines = [
        "EXECUTION TRACE",
        "=" * 60,
    ]
    for entry in trace[:TRACE_LIMIT]:
        if entry.instruction is None:
            trace_lines.append(f"\n--- Cycle {entry.cycle} (PC={entry.address}) --- {entry.error}")
            continue
        trace_lines.append(f"\n--- Cycle {entry.cycle} (PC={entry.address:02d}) ---")
        trace_lines.append(
            f"Instruction: {entry.instruction:03d} ({cpu.decoder.disassemble(entry.instruction)})"
        )
        pre_acc = entry.pre_state["accumulator"]
        post_acc = entry.post_state["accumulator"]
        if pre_acc != post_acc:
            trace_lines.append(f"ACC:         {pre_acc} -> {post_acc}")
        if entry.error:
            trace_lines.append(f"Note:        {entry.error}")

    if len(trace) > TRACE_LIMIT:
        trace_lines.append(f"\n... ({len(trace) - TRACE_LIMIT} more entries)")

    trace_text = "\n".join(trace_lines)

    # Format memory
    memory_lines = [
        "MAILBOXES (non-zero)",
        "=" * 30,
    ]
    for address, value in summary["memory"].items():
        memory_lines.append(f"  {address:02d}: {value:>6}  {cpu.decoder.disassemble(value)}")

    return summary_text, trace_text, "\n".join(memory_lines)


def load_example(example_name: str) -> tuple:
    """Load a sample program, its inputs and its word policy."""
    if example_name not in SAMPLES:
        return "", "", "decimal"
    sample = SAMPLES[example_name]
    return (
        sample_source(example_name),
        ", ".join(str(value) for value in sample.inputs),
        sample.word,
    )


# =============================================================================
# Gradio Interface
# =============================================================================

def create_demo():
    """Create and return the Gradio demo interface."""

    first = next(iter(SAMPLES))
    first_source, first_inputs, first_word = load_example(first)

    with gr.Blocks(title="LMC-VM Demo", theme=gr.themes.Soft()) as demo:
        gr.Markdown("""
        # LMC-VM: Little Man Computer

        A decimal, single-accumulator machine with 100 mailboxes.

        **Pipeline**: `fetch -> decode -> key -> registry -> state`
        """)

        with gr.Row():
            with gr.Column(scale=2):
                gr.Markdown("### Program")

                example_dropdown = gr.Dropdown(
                    choices=list(SAMPLES.keys()),
                    value=first,
                    label="Load Sample"
                )

                program_input = gr.Textbox(
                    value=first_source,
                    label="Mailboxes (one value per line, // for comments)",
                    lines=15,
                )

                inputs_box = gr.Textbox(
                    value=first_inputs,
                    label="Inputs",
                    placeholder="5, 3"
                )

                gr.Markdown("### Settings")

                with gr.Row():
                    word_radio = gr.Radio(
                        choices=["decimal", "int32", "int64"],
                        value=first_word,
                        label="Word Policy",
                        info="decimal: wrap mod 1000 | int32/int64: clamp"
                    )
                    max_cycles = gr.Slider(
                        minimum=100,
                        maximum=100000,
                        value=10000,
                        step=100,
                        label="Max Cycles"
                    )

                run_button = gr.Button("Run Program", variant="primary")

            with gr.Column(scale=3):
                with gr.Row():
                    summary_output = gr.Textbox(
                        label="Summary",
                        lines=10,
                        interactive=False
                    )
                    memory_output = gr.Textbox(
                        label="Final Mailboxes",
                        lines=10,
                        interactive=False
                    )

                trace_output = gr.Textbox(
                    label="Execution Trace",
                    lines=20,
                    interactive=False
                )

        with gr.Accordion("Instruction Set", open=False):
            gr.Markdown("""
            | Code | Mnemonic | Description |
            |------|----------|-------------|
            | `1xx` | ADD | ACC = ACC + [xx] |
            | `2xx` | SUB | ACC = ACC - [xx] |
            | `3xx` | STA | [xx] = ACC |
            | `5xx` | LDA | ACC = [xx] |
            | `6xx` | BRA | Branch to xx |
            | `7xx` | BRZ | Branch to xx if ACC = 0 |
            | `8xx` | BRP | Branch to xx if ACC is positive |
            | `901` | INP | ACC = next input |
            | `902` | OUT | Output ACC |
            | `000` | HLT | Stop |

            **decimal**: ACC wraps within 0-999, positive means below 500.
            **int32 / int64**: ACC clamps at the signed bounds, positive means >= 0.
            """)

        # Event handlers
        example_dropdown.change(
            fn=load_example,
            inputs=[example_dropdown],
            outputs=[program_input, inputs_box, word_radio]
        )

        run_button.click(
            fn=run_program,
            inputs=[program_input, inputs_box, word_radio, max_cycles],
            outputs=[summary_output, trace_output, memory_output]
        )

    return demo


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    demo = create_demo()
    demo.launch(
        share=False,
        server_name="0.0.0.0",
        server_port=7861,
        show_error=True
    )
