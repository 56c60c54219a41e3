"""
jsonshape demonstration script.
"""

import jsonshape


def main():
    print("jsonshape - JSON Structure Analysis Demo")
    print("=" * 40)

    examples = [
        # Well-formed document
        ('{"a": {"b": 1}, "c": [1, 2, 3]}', "Well-formed document"),
        # Large array is sampled
        ('{"ids": [' + ", ".join(str(i) for i in range(50)) + "]}", "Array sampling"),
        # Recoverable syntax errors
        ('{"name": "x",, "tags": ["a" "b"], "ok": true}', "Recoverable syntax errors"),
        # Truncated input
        ('{"events": [{"t": 1}, {"t": 2}, {"t":', "Truncated document"),
        # Garbage around valid pieces
        ('log: {"x": 1} ... [1, 2, 3] <eof>', "Damaged content"),
    ]

    for i, (json_str, description) in enumerate(examples, 1):
        print(f"\n{i}. {description}")
        print(f"Input:  {json_str[:70]}")

        report = jsonshape.analyze(json_str)
        print(f"Tier:   {report.tier.value} (partial={report.partial})")
        for path, node in report.structure.items():
            print(f"  {path or '<root>'}: {node.to_dict()}")
        for fragment in report.fragments:
            print(f"  fragment at {fragment.position}: {fragment.content}")
        for error in report.errors:
            print(f"  error at {error.line}:{error.column}: {error.message}")


if __name__ == "__main__":
    main()
