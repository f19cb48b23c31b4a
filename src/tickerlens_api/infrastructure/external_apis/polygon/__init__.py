# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Polygon external API package."""
