# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""SEC EDGAR: ticker reference table, companyfacts and submissions documents."""
