"""CLI script running the song pipeline against the bundled sample or a given CSV.

Usage
-----
    python scripts/run_song_pipeline.py --csv path/to/songs.csv --output-dir out/

Equivalent to the ``song-pipeline`` console script.
"""

import sys

from song_tlbx.pipeline import main


if __name__ == "__main__":
    sys.exit(main())
