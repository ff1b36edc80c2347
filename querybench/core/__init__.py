"""QueryBench core - configuration shared by every layer."""
