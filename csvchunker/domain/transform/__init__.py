from csvchunker.domain.transform.transformers import (
    add_chunk_row_no_transformer,
    add_constant_column_transformer,
    add_row_no_transformer,
    chain_transformers,
    no_op_transformer,
    replace_values_transformer,
)
from csvchunker.domain.transform.wrappers import TransformerWrapper, debug_wrapper, panic_safe

__all__ = [
    "add_chunk_row_no_transformer",
    "add_constant_column_transformer",
    "add_row_no_transformer",
    "chain_transformers",
    "no_op_transformer",
    "replace_values_transformer",
    "TransformerWrapper",
    "debug_wrapper",
    "panic_safe",
]
