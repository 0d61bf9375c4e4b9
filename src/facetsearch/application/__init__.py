"""Application layer – search composition, dispatch, normalization and state."""
