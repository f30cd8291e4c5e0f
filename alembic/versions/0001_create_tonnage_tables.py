"""create_tonnage_tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, Hevy connection, workout and derived tables."""
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            idp_user_id UUID NOT NULL UNIQUE,
            email TEXT,
            username TEXT,
            created_at TIMESTAMP NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMP NOT NULL DEFAULT NOW()
        );

        CREATE OR REPLACE FUNCTION update_users_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;

        DROP TRIGGER IF EXISTS users_updated_at_trigger ON users;
        CREATE TRIGGER users_updated_at_trigger
            BEFORE UPDATE ON users
            FOR EACH ROW
            EXECUTE FUNCTION update_users_updated_at();
    """)

    op.execute("""
        CREATE TABLE hevy_connections (
            user_id UUID PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            api_key TEXT NOT NULL,
            goal_lb DOUBLE PRECISION NOT NULL DEFAULT 3000000,
            selected_year INT,
            default_bodyweight_lb DOUBLE PRECISION,
            last_sync_at TIMESTAMP WITH TIME ZONE,
            status VARCHAR(20) NOT NULL DEFAULT 'ok'
                CHECK (status IN ('ok', 'auth_error', 'rate_limited', 'error')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # Set data lives in the exercises JSONB column.
    op.execute("""
        CREATE TABLE workouts (
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            id VARCHAR(255) NOT NULL,
            title VARCHAR(255),
            description TEXT,
            start_time TIMESTAMP WITH TIME ZONE NOT NULL,
            end_time TIMESTAMP WITH TIME ZONE,
            exercises JSONB NOT NULL DEFAULT '[]',
            volume_lb BIGINT NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (user_id, id)
        )
    """)
    op.execute(
        "CREATE INDEX idx_workouts_user_start_time ON workouts (user_id, start_time)"
    )

    op.execute("""
        CREATE TABLE daily_aggregates (
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            date DATE NOT NULL,
            year INT NOT NULL,
            volume_lb BIGINT NOT NULL DEFAULT 0,
            workouts_count INT NOT NULL DEFAULT 0,
            prs_count INT NOT NULL DEFAULT 0,
            PRIMARY KEY (user_id, date)
        )
    """)
    op.execute(
        "CREATE INDEX idx_daily_aggregates_user_year ON daily_aggregates (user_id, year)"
    )

    op.execute("""
        CREATE TABLE pr_events (
            id BIGSERIAL PRIMARY KEY,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            date DATE NOT NULL,
            type VARCHAR(50) NOT NULL CHECK (type IN (
                'exercise_max_weight',
                'exercise_max_set_volume',
                'exercise_max_session_volume',
                'daily_total_volume'
            )),
            value DOUBLE PRECISION NOT NULL,
            previous_best DOUBLE PRECISION NOT NULL DEFAULT 0,
            delta DOUBLE PRECISION NOT NULL DEFAULT 0,
            workout_id VARCHAR(255),
            exercise_template_id VARCHAR(255),
            exercise_name VARCHAR(255),
            reps INT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    op.execute("CREATE INDEX idx_pr_events_user_date ON pr_events (user_id, date)")

    op.execute("""
        CREATE TABLE exercise_prs (
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            exercise_template_id VARCHAR(255) NOT NULL,
            exercise_name VARCHAR(255) NOT NULL,
            exercise_type VARCHAR(50) NOT NULL,
            max_weight_lb DOUBLE PRECISION NOT NULL DEFAULT 0,
            max_weight_reps INT,
            max_weight_date DATE,
            max_set_volume_lb DOUBLE PRECISION NOT NULL DEFAULT 0,
            max_set_volume_date DATE,
            max_session_volume_lb DOUBLE PRECISION NOT NULL DEFAULT 0,
            max_session_volume_date DATE,
            PRIMARY KEY (user_id, exercise_template_id)
        )
    """)

    op.execute("""
        CREATE TABLE weight_log (
            id SERIAL PRIMARY KEY,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            date DATE NOT NULL,
            weight_lb DOUBLE PRECISION NOT NULL CHECK (weight_lb > 0),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id, date)
        )
    """)

    op.execute("""
        CREATE TABLE exercise_templates (
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            id VARCHAR(255) NOT NULL,
            title VARCHAR(255) NOT NULL,
            hevy_type VARCHAR(100),
            exercise_type VARCHAR(50) CHECK (exercise_type IN (
                'weight_reps', 'bodyweight', 'bodyweight_weighted', 'bodyweight_assisted'
            )),
            primary_muscle_group VARCHAR(100),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (user_id, id)
        )
    """)


def downgrade() -> None:
    """Drop all tables."""
    op.execute("DROP TABLE IF EXISTS exercise_templates")
    op.execute("DROP TABLE IF EXISTS weight_log")
    op.execute("DROP TABLE IF EXISTS exercise_prs")
    op.execute("DROP TABLE IF EXISTS pr_events")
    op.execute("DROP TABLE IF EXISTS daily_aggregates")
    op.execute("DROP TABLE IF EXISTS workouts")
    op.execute("DROP TABLE IF EXISTS hevy_connections")
    op.execute("""
        DROP TRIGGER IF EXISTS users_updated_at_trigger ON users;
        DROP FUNCTION IF EXISTS update_users_updated_at();
        DROP TABLE IF EXISTS users CASCADE;
    """)
