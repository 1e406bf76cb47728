from .datatype import (
    ElementaryType,
    TypeProfile,
    guess_type,
    infer_predicate_types,
    is_compatible,
    profile_predicates,
)
from .outliers import clustering_outlier_test, compute_outlier_table
from .records import DataTypeValidator, check_triples

__all__ = [
    "ElementaryType",
    "TypeProfile",
    "guess_type",
    "infer_predicate_types",
    "is_compatible",
    "profile_predicates",
    "clustering_outlier_test",
    "compute_outlier_table",
    "DataTypeValidator",
    "check_triples",
]
