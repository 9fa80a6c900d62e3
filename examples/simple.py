import sys
from pathlib import Path

from malody_chart import load

path = Path(__file__).parent.parent / "testdata" / "key_4k.json"
with open(path, encoding="utf-8") as f:
    chart = load(f)

# Access metadata
sys.stdout.write(f"{chart.song.title} [{chart.name}] by {chart.creator}\n")
sys.stdout.write(f"{chart.columns} columns, {len(chart.notes)} notes\n")

# Entries are sorted by exact beat position
for timing in chart.timings:
    beat, numerator, denominator = timing.time.as_tuple()
    position = f"{beat}+{numerator}/{denominator}"
    sys.stdout.write(f"{position}: {timing.bpm} BPM ({timing.ms_per_beat:.1f} ms per beat)\n")
