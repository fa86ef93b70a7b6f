import sys

from uuid_timestamp_sdk.cli import main

sys.exit(main())
