# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Financial Modeling Prep external API package."""
