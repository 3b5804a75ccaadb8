"""Tests for the Coway IoCare integration."""
