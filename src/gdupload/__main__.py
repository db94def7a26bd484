import sys

from gdupload.cli import main

sys.exit(main())
