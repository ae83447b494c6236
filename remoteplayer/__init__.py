"""Stream game controller state over UDP and feed it to emulated Xbox 360 controllers."""

__version__ = "0.1.0"