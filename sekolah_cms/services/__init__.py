"""
Entity services. Every mutation takes `(db, ctx, ...)` and returns an ActionResult;
reads return plain dicts (or None).
"""
