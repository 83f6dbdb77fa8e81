"""Static data — component recipes and configuration payloads."""
