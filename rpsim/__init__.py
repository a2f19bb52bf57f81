"""Register-level models of RP2350 peripherals, with a shared clock and interrupt lines."""

__version__ = "0.1.0"