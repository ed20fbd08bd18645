from tortoise import BaseDBAsyncClient


async def upgrade(db: BaseDBAsyncClient) -> str:
    return """
        CREATE TABLE IF NOT EXISTS "users" (
            "id" UUID NOT NULL PRIMARY KEY,
            "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            "email" VARCHAR(255) NOT NULL UNIQUE,
            "full_name" VARCHAR(255),
            "role" VARCHAR(50) NOT NULL DEFAULT 'user',
            "storage_used_bytes" BIGINT NOT NULL DEFAULT 0,
            "storage_limit_bytes" BIGINT NOT NULL DEFAULT 5368709120
        );
        COMMENT ON TABLE "users" IS 'Users Table';
        CREATE TABLE IF NOT EXISTS "documents" (
            "id" UUID NOT NULL PRIMARY KEY,
            "created_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            "updated_at" TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            "user_id" UUID NOT NULL REFERENCES "users" ("id") ON DELETE CASCADE,
            "workspace_id" UUID,
            "title" VARCHAR(500) NOT NULL,
            "file_name" VARCHAR(255),
            "file_type" VARCHAR(20),
            "mime_type" VARCHAR(100),
            "file_path" VARCHAR(1000),
            "file_size_bytes" BIGINT,
            "content" TEXT,
            "summary" TEXT,
            "status" VARCHAR(20) NOT NULL DEFAULT 'uploading'
                CHECK ("status" IN ('uploading', 'processing', 'completed', 'failed')),
            "processing_error" TEXT,
            "deleted_at" TIMESTAMPTZ
        );
        COMMENT ON TABLE "documents" IS 'Documents Table';
        COMMENT ON COLUMN "documents"."status" IS 'UPLOADING: uploading\nPROCESSING: processing\nCOMPLETED: completed\nFAILED: failed';
        CREATE INDEX IF NOT EXISTS "idx_documents_user_live" ON "documents" ("user_id") WHERE "deleted_at" IS NULL;
        CREATE INDEX IF NOT EXISTS "idx_documents_status" ON "documents" ("status");
        CREATE INDEX IF NOT EXISTS "idx_documents_created_at" ON "documents" ("created_at" DESC);
        CREATE TABLE IF NOT EXISTS "aerich" (
            "id" SERIAL NOT NULL PRIMARY KEY,
            "version" VARCHAR(255) NOT NULL,
            "app" VARCHAR(100) NOT NULL,
            "content" JSONB NOT NULL
        );
    """


async def downgrade(db: BaseDBAsyncClient) -> str:
    return """
        """
