#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""
import civic_chat.env_bootstrap  # noqa: F401

import os
import sys


def main():
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "civic_chat.settings")
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
