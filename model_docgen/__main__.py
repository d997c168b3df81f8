import sys

from model_docgen.cli import main

sys.exit(main())
