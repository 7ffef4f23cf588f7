"""Services - checkout gate, feedback reporting and bundled order sync."""
