"""Key vocabulary, tokens and the expression engine."""
