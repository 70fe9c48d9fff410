"""python -m todo_matrix"""

import sys

from .cli import main

sys.exit(main())
