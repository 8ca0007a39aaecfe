"""Domain entities and pure services of kvgraph."""
