import sys

from wordle_bench.cli import main

sys.exit(main())
