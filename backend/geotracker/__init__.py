"""GEO Tracker backend: prompt bootstrap and AI visibility tracking."""
