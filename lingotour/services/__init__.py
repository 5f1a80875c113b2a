"""Services - external collaborators the pipeline calls into."""
