# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the overloadable documentation."""

project = "overloadable"
author = "Overloadable Contributors"
release = "0.1.0"

extensions: list[str] = []

html_theme = "alabaster"
