"""Database schema for listings and their pricing overrides (PostgreSQL)."""

# =============================================================================
# SQL Schema
# =============================================================================

CREATE_TABLES_SQL = """
-- Properties (listing-level price covers `nights` nights)
CREATE TABLE IF NOT EXISTS properties (
    id SERIAL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    price INTEGER NOT NULL,
    nights INTEGER DEFAULT 1,
    peak_season_price INTEGER,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Rooms
CREATE TABLE IF NOT EXISTS rooms (
    id SERIAL PRIMARY KEY,
    property_id INTEGER NOT NULL REFERENCES properties(id) ON DELETE CASCADE,
    name VARCHAR(255) NOT NULL,
    price_per_night INTEGER NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_rooms_property_id ON rooms(property_id);

-- Per-date pricing flags (room_id NULL = property-wide)
CREATE TABLE IF NOT EXISTS property_pricing (
    id SERIAL PRIMARY KEY,
    property_id INTEGER NOT NULL REFERENCES properties(id) ON DELETE CASCADE,
    room_id INTEGER REFERENCES rooms(id) ON DELETE CASCADE,
    date DATE NOT NULL,
    price INTEGER NOT NULL,
    price_type VARCHAR(50) NOT NULL, -- available, sold_out, peak_season, best_deal
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_property_pricing_property_date ON property_pricing(property_id, date);
CREATE INDEX IF NOT EXISTS idx_property_pricing_room_date ON property_pricing(room_id, date);

-- Per-room availability
CREATE TABLE IF NOT EXISTS room_availability (
    id SERIAL PRIMARY KEY,
    room_id INTEGER NOT NULL REFERENCES rooms(id) ON DELETE CASCADE,
    date DATE NOT NULL,
    is_available BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

    CONSTRAINT room_availability_room_date_key UNIQUE (room_id, date)
);

-- Peak season windows (room_id NULL = property-wide)
CREATE TABLE IF NOT EXISTS peak_season_rates (
    id SERIAL PRIMARY KEY,
    property_id INTEGER REFERENCES properties(id) ON DELETE CASCADE,
    room_id INTEGER REFERENCES rooms(id) ON DELETE CASCADE,
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    price_increase INTEGER,
    percentage_increase NUMERIC(5, 2),
    is_active BOOLEAN DEFAULT TRUE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,

    CONSTRAINT peak_season_rates_target CHECK (property_id IS NOT NULL OR room_id IS NOT NULL),
    CONSTRAINT peak_season_rates_span CHECK (end_date >= start_date)
);

CREATE INDEX IF NOT EXISTS idx_peak_season_rates_dates ON peak_season_rates(start_date, end_date);

-- Function to update updated_at
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';

-- Triggers for updated_at
DROP TRIGGER IF EXISTS update_properties_updated_at ON properties;
CREATE TRIGGER update_properties_updated_at
    BEFORE UPDATE ON properties
    FOR EACH ROW
    EXECUTE FUNCTION update_updated_at_column();

DROP TRIGGER IF EXISTS update_rooms_updated_at ON rooms;
CREATE TRIGGER update_rooms_updated_at
    BEFORE UPDATE ON rooms
    FOR EACH ROW
    EXECUTE FUNCTION update_updated_at_column();

DROP TRIGGER IF EXISTS update_peak_season_rates_updated_at ON peak_season_rates;
CREATE TRIGGER update_peak_season_rates_updated_at
    BEFORE UPDATE ON peak_season_rates
    FOR EACH ROW
    EXECUTE FUNCTION update_updated_at_column();
"""
