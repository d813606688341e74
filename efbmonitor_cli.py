#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
efbmonitor-cli entry point
python efbmonitor_cli.py 또는 python -m efbmonitor.cli 로 실행
"""

from efbmonitor.cli import main

if __name__ == "__main__":
    import sys
    sys.exit(main())
