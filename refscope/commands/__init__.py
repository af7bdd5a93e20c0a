"""Click commands for refscope."""
