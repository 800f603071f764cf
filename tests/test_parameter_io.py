"""
Tests for the OTI and FEC payload ID field codec.
"""

import pytest
from rqoti import ParameterIO as pio
from rqoti.Errors import InvalidParameterError


class TestCommonOTI:
    """Test the 64-bit common OTI (F, reserved, T)."""

    def test_layout(self):
        """F in the top 40 bits, T in the low 16, reserved octet zero."""
        oti = pio.build_common_fec_oti(1_000_000, 1024)
        assert oti == (1_000_000 << 24) | 1024
        assert (oti >> 16) & 0xFF == 0

    def test_extract(self):
        """Fields read back unchanged."""
        oti = pio.build_common_fec_oti(123_456_789, 1400)
        assert pio.extract_data_length(oti) == 123_456_789
        assert pio.extract_symbol_size(oti) == 1400

    def test_field_maxima(self):
        """All-ones fields leave the reserved octet clear."""
        oti = pio.build_common_fec_oti((1 << 40) - 1, (1 << 16) - 1)
        assert oti == 0xFFFFFFFFFF00FFFF

    def test_field_overflow(self):
        """Values wider than their field are rejected."""
        with pytest.raises(InvalidParameterError) as exc:
            pio.build_common_fec_oti(1 << 40, 1024)
        assert exc.value.parameter == 'F'

        with pytest.raises(InvalidParameterError) as exc:
            pio.build_common_fec_oti(1000, 1 << 16)
        assert exc.value.parameter == 'T'

    def test_bytes(self):
        """Network byte order."""
        oti = pio.build_common_fec_oti(1_000_000, 1024)
        data = pio.common_oti_to_bytes(oti)
        assert data == bytes.fromhex('00000f4240000400')
        assert pio.common_oti_from_bytes(data) == oti
        assert pio.common_oti_from_bytes(bytearray(data)) == oti

    def test_bytes_wrong_size(self):
        """Only 8 octets are accepted."""
        with pytest.raises(InvalidParameterError):
            pio.common_oti_from_bytes(b'\x00' * 7)
        with pytest.raises(InvalidParameterError):
            pio.common_oti_from_bytes(b'\x00' * 9)

    def test_bytes_reserved_set(self):
        """Non-zero reserved octet is rejected."""
        with pytest.raises(InvalidParameterError):
            pio.common_oti_from_bytes(bytes.fromhex('00000f4240010400'))


class TestSchemeSpecificOTI:
    """Test the 32-bit scheme-specific OTI (Z, N, Al)."""

    def test_layout(self):
        """Z in the top octet, N in the middle 16 bits, Al in the low octet."""
        assert pio.build_scheme_specific_fec_oti(1, 1, 4) == 0x01000104
        assert pio.build_scheme_specific_fec_oti(255, 0xFFFF, 0xFF) == 0xFFFFFFFF

    def test_extract(self):
        """Fields read back unchanged."""
        oti = pio.build_scheme_specific_fec_oti(17, 300, 4)
        assert pio.extract_num_source_blocks(oti) == 17
        assert pio.extract_interleaver_length(oti) == 300
        assert pio.extract_symbol_alignment(oti) == 4

    def test_256_source_blocks(self):
        """Z=256 is carried as 0."""
        oti = pio.build_scheme_specific_fec_oti(256, 2, 4)
        assert oti == 0x00000204
        assert pio.extract_num_source_blocks(oti) == 256

    def test_z_not_encodable(self):
        """Z outside 1-256 cannot be packed."""
        for Z in (0, 257):
            with pytest.raises(InvalidParameterError) as exc:
                pio.build_scheme_specific_fec_oti(Z, 1, 4)
            assert exc.value.parameter == 'Z'

    def test_field_overflow(self):
        """N and Al wider than their fields are rejected."""
        with pytest.raises(InvalidParameterError) as exc:
            pio.build_scheme_specific_fec_oti(1, 1 << 16, 4)
        assert exc.value.parameter == 'N'

        with pytest.raises(InvalidParameterError) as exc:
            pio.build_scheme_specific_fec_oti(1, 1, 256)
        assert exc.value.parameter == 'Al'

    def test_bytes(self):
        """Network byte order."""
        data = pio.scheme_specific_oti_to_bytes(0x01000104)
        assert data == bytes.fromhex('01000104')
        assert pio.scheme_specific_oti_from_bytes(data) == 0x01000104

        with pytest.raises(InvalidParameterError):
            pio.scheme_specific_oti_from_bytes(b'\x01\x00\x01')


class TestPayloadId:
    """Test the 32-bit FEC payload ID (SBN, ESI)."""

    def test_layout(self):
        """SBN in the top octet, ESI in the low 24 bits."""
        payload_id = pio.build_fec_payload_id(3, 0x123456)
        assert payload_id == 0x03123456
        assert pio.extract_source_block_number(payload_id) == 3
        assert pio.extract_encoding_symbol_id(payload_id) == 0x123456

    def test_bytes(self):
        """Packs to 4 octets and reads back as (SBN, ESI)."""
        data = pio.payload_id_to_bytes(3, 0x123456)
        assert data == bytes.fromhex('03123456')
        assert pio.payload_id_from_bytes(data) == (3, 0x123456)
        assert pio.payload_id_from_bytes(bytes.fromhex('ffffffff')) == (255, (1 << 24) - 1)

    def test_field_overflow(self):
        """SBN and ESI wider than their fields are rejected."""
        with pytest.raises(InvalidParameterError) as exc:
            pio.build_fec_payload_id(256, 0)
        assert exc.value.parameter == 'SBN'

        with pytest.raises(InvalidParameterError) as exc:
            pio.build_fec_payload_id(0, 1 << 24)
        assert exc.value.parameter == 'ESI'

    def test_bytes_wrong_size(self):
        """Only 4 octets are accepted."""
        with pytest.raises(InvalidParameterError):
            pio.payload_id_from_bytes(b'\x00' * 5)


class TestFieldSizes:
    """Test the exported field size table."""

    def test_oti_sizes(self):
        """Package table follows the codec constants."""
        from rqoti import OTI_SIZES
        from rqoti.FECParameters import OTI_SIZE

        assert OTI_SIZES == {'common': 8, 'scheme_specific': 4, 'payload_id': 4}
        assert OTI_SIZES['common'] + OTI_SIZES['scheme_specific'] == OTI_SIZE
