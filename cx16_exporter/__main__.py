import sys

from cx16_exporter.cli import main

sys.exit(main())
