"""Command line front end for the Notion client."""
