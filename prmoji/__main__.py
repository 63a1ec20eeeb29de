import sys

from prmoji.main import main

sys.exit(main())
