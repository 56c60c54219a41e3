"""
Streaming functionality demonstration for jsonshape.
"""

import json
import os
import tempfile

import jsonshape
from jsonshape import AnalysisConfig, StreamingTokenizer, Timings


def main():
    print("jsonshape - Streaming Features Demo")
    print("=" * 40)

    # Example 1: Feeding the tokenizer by hand
    print("\n1. Feeding Chunks by Hand")
    tokenizer = StreamingTokenizer()
    for chunk in ['{"message": "Hel', 'lo", "data": [1, 2', ", 3]}"]:
        tokenizer.feed(chunk)
        print(f"  fed {chunk!r:24} depth={tokenizer.depth}")
    report = tokenizer.finalize()
    print(f"✓ Paths: {report.paths}")

    # Example 2: Inspecting an unfinished stream
    print("\n2. Snapshot of an Unfinished Stream")
    tokenizer = StreamingTokenizer()
    tokenizer.feed('{"items": [{"id": 1}, {"id": 2}')
    snapshot = tokenizer.snapshot()
    print(f"✓ complete={snapshot.complete}, items length so far: {snapshot.get('items').length}")

    # Example 3: Streaming a file above the whole-document threshold
    print("\n3. Streaming a Large File")
    records = [{"id": i, "lat": 47.0 + i / 1e5, "tags": ["gps", "wifi"]} for i in range(100000)]
    with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
        json.dump({"records": records}, f)
        temp_path = f.name

    try:
        print(f"  File size: {os.path.getsize(temp_path):,} bytes")
        config = AnalysisConfig(standard_parse_threshold=1024 * 1024, chunk_size=64 * 1024)
        timings = Timings()
        report = jsonshape.analyze_file(temp_path, config, timings)
        print(f"✓ Tier: {report.tier.value}, {len(report.structure)} paths")
        print(f"✓ records length: {report.get('records').length:,}")
        print(f"✓ Timings: {timings.to_dict()}")
    finally:
        os.unlink(temp_path)


if __name__ == "__main__":
    main()
