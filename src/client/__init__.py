"""Client-side series cache package."""

from src.client.mutation_client import (
    InvalidInputError,
    MutationClient,
    parse_cell_input,
)

__all__ = ["InvalidInputError", "MutationClient", "parse_cell_input"]
