"""TalentScope: P90 top performer profiling for psychometric benchmarks."""
