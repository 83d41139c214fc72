"""Test suite for datedbackup, backupcore and pathkit."""
