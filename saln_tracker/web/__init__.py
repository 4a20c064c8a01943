# Server-rendered pages, Jinja filters and the shared data store
