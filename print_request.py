#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Build a print-ready A4 PDF from a document or a set of images.
"""

# local repo modules
import printdesk.cli


if __name__ == "__main__":
	printdesk.cli.main()
