"""Sarva package: numeric equation and inequality solving with parser, compiler, solver, plotting and CLI."""

__all__ = [
    "config",
    "parser",
    "compiler",
    "solver",
    "plotting",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "solve",
    "solve_equation",
    "solve_inequality",
    "plot",
]
