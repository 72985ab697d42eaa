"""Test fakes for the release server and environment store."""
