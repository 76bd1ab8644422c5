"""Runtime systems driven by the frame clock."""
