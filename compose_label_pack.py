#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Merge a marketplace shipping label with product stickers into one PDF.
"""

# local repo modules
import label_pack_composer.cli


if __name__ == "__main__":
	label_pack_composer.cli.main()
