"""
Fragment recovery demonstration for jsonshape.

This demo shows how jsonshape still reports something useful for documents
too damaged for the streaming tokenizer.
"""

from jsonshape import parse_partial, recover
from jsonshape.core.report import StructureReport


def print_report(title: str, report: StructureReport) -> None:
    """Helper function to print partial tier reports nicely."""
    print(f"\n{title}")
    print("=" * len(title))

    print(f"Fixed: {report.fixed}  Corrupted: {report.corrupted}")
    if report.structure:
        print(f"Paths: {report.paths}")
    for fragment in report.fragments:
        print(f"  • {fragment.type.value} at offset {fragment.position}: {fragment.parsed_value}")
    for error in report.errors:
        print(f"  ✗ {error.message} at line {error.line}")


def main() -> None:
    print("🚀 jsonshape Fragment Recovery Demo")
    print("=" * 40)

    # Trailing commas are fixed before giving up on the document
    print_report("Trailing commas", parse_partial('{"a": [1, 2,], "b": {"c": 3,},}'))

    # Log output with JSON pieces embedded in it
    log_output = """
    2024-01-01 INFO request {"user": "alice", "status": 200}
    2024-01-01 WARN retry [1, 2, 3
    2024-01-01 INFO response {"items": [4, 5]} done
    """
    print_report("Embedded fragments", parse_partial(log_output))

    # Binary content yields no fragments and no exception
    print(f"\nBinary content: {recover(chr(0) + chr(255) + 'PNG{[' + chr(1))}")


if __name__ == "__main__":
    main()
