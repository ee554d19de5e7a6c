"""
Create the pgvector-backed brand_vectors store and its similarity RPC.

brand_vectors is read and written through the supabase client
(lumora.brandbrain.vector_store), not the ORM, so it has no model.

Everything here is PostgreSQL-specific and skips on SQLite for tests.
"""

from django.db import connection, migrations


def is_postgresql():
    """Check if we're running on PostgreSQL."""
    return connection.vendor == "postgresql"


def run_if_postgresql(sql):
    """Return a function that runs SQL only on PostgreSQL."""
    def forward(apps, schema_editor):
        if is_postgresql():
            schema_editor.execute(sql)
    return forward


def reverse_if_postgresql(sql):
    """Return a function that runs reverse SQL only on PostgreSQL."""
    def reverse(apps, schema_editor):
        if is_postgresql():
            schema_editor.execute(sql)
    return reverse


class Migration(migrations.Migration):

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(
            run_if_postgresql("CREATE EXTENSION IF NOT EXISTS vector;"),
            reverse_if_postgresql("SELECT 1;"),
        ),

        # One row per (brand, source_key); embeddings are 1536-dimensional
        migrations.RunPython(
            run_if_postgresql("""
                CREATE TABLE IF NOT EXISTS brand_vectors (
                    id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
                    brand_id uuid NOT NULL REFERENCES brands (id) ON DELETE CASCADE,
                    type text NOT NULL,
                    source_key text NOT NULL,
                    content text NOT NULL,
                    metadata jsonb,
                    embedding vector(1536),
                    created_at timestamptz NOT NULL DEFAULT now(),
                    CONSTRAINT uniq_brand_vectors_source UNIQUE (brand_id, source_key)
                );
            """),
            reverse_if_postgresql("DROP TABLE IF EXISTS brand_vectors;"),
        ),

        migrations.RunPython(
            run_if_postgresql("""
                CREATE INDEX IF NOT EXISTS idx_brand_vectors_embedding
                ON brand_vectors USING ivfflat (embedding vector_cosine_ops)
                WITH (lists = 100);
            """),
            reverse_if_postgresql("DROP INDEX IF EXISTS idx_brand_vectors_embedding;"),
        ),

        # Cosine similarity search scoped to one brand
        migrations.RunPython(
            run_if_postgresql("""
                CREATE OR REPLACE FUNCTION match_brand_vectors(
                    brand_id uuid,
                    match_count int,
                    query_embedding vector(1536)
                )
                RETURNS TABLE (
                    id uuid,
                    type text,
                    source_key text,
                    content text,
                    metadata jsonb,
                    similarity float
                )
                LANGUAGE sql STABLE
                AS $$
                    SELECT
                        bv.id,
                        bv.type,
                        bv.source_key,
                        bv.content,
                        bv.metadata,
                        1 - (bv.embedding <=> query_embedding) AS similarity
                    FROM brand_vectors bv
                    WHERE bv.brand_id = match_brand_vectors.brand_id
                    ORDER BY bv.embedding <=> query_embedding
                    LIMIT match_count;
                $$;
            """),
            reverse_if_postgresql(
                "DROP FUNCTION IF EXISTS match_brand_vectors(uuid, int, vector);"
            ),
        ),
    ]
