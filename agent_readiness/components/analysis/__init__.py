"""Analysis inputs: static analysis variants, AI assessments and collaborator contracts."""
