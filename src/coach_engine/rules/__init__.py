"""Weekly plan constraint rules, auto-discovered by RuleRegistry."""
