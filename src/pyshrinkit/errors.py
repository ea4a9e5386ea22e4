"""Input errors raised before any variance computation."""


class ShrinkageInputError(ValueError):
    """Base class for invalid shrinkage inputs."""


class EmptyInputError(ShrinkageInputError):
    """An input array has no elements."""


class InvalidTypeError(ShrinkageInputError, TypeError):
    """An input array is not real-valued numeric."""


class NonFiniteInputError(ShrinkageInputError):
    """An input array contains NaN or infinite values."""


class ShapeMismatchError(ShrinkageInputError):
    """Input arrays do not share the same shape."""


class AmbiguousSubjectAxisError(ShrinkageInputError):
    """A 1-D input was given without confirming its axis indexes subjects."""

    def __init__(self, num_candidates: int):
        self.num_candidates = num_candidates
        super().__init__(
            f"Inputs are 1-D with {num_candidates} entries; cannot tell whether "
            f"this axis indexes {num_candidates} subjects. Pass "
            f"confirm_subject_axis=True to treat it as the subject axis."
        )


class InsufficientSubjectsError(ShrinkageInputError):
    """The subject axis has fewer than two entries."""
