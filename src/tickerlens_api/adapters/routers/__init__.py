# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""HTTP routers (Adapters Layer)."""
