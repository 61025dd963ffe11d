"""Tests for joseutils.jwe."""
import json
import os
import sys
import unittest

import josepy as jose
import pytest

from joseutils import errors
from joseutils._internal.tests import test_util

EPK = {
    'kty': 'EC',
    'crv': 'P-256',
    'x': '0_Zip_vHBNI-P_in4S2OuPsxWy9cMWCem-ubr4hK1D0',
    'y': 'UTIlc5Vf0UlyrOgxFzZjt3JwKTA99cfkVNGu70_UZpA',
}
EPK_JSON = json.dumps(EPK, separators=(',', ':'))

PROTECTED = {
    'protectedHeader1': 'protectedTestValue1',
    'protectedHeader2': 'protectedTestValue2',
}
PROTECTED_B64 = test_util.reference_b64url(
    b'{"protectedHeader1":"protectedTestValue1",'
    b'"protectedHeader2":"protectedTestValue2"}')
UNPROTECTED = {
    'unprotectedHeader1': 'unprotectedTestValue1',
    'unprotectedHeader2': 'unprotectedTestValue2',
}
UNPROTECTED_JSON = json.dumps(UNPROTECTED, separators=(',', ':'))


def _dumps(jwe):
    return json.dumps(jwe.to_json(), separators=(',', ':'))


class JWECompactTest(unittest.TestCase):
    """Tests for joseutils.jwe.JWE compact serialization."""

    def setUp(self):
        from joseutils.jwe import JWE
        from joseutils.jwe import Recipient
        self.jwe = JWE(
            protected=PROTECTED,
            recipients=(Recipient(encrypted_key=b'TestKey'),),
            iv=b'TestIV', ciphertext=b'TestCipherText', tag=b'TestTag')

    def test_to_compact(self):
        assert self.jwe.to_compact() == (
            PROTECTED_B64 + '.VGVzdEtleQ.VGVzdElW.VGVzdENpcGhlclRleHQ.VGVzdFRhZw')

    def test_header_vector(self):
        jwe = self.jwe.update(protected={'enc': 'A256GCM', 'alg': 'A256KW'})
        assert jwe.to_compact().split('.')[0] == \
            'eyJhbGciOiJBMjU2S1ciLCJlbmMiOiJBMjU2R0NNIn0'

    def test_empty_segments(self):
        jwe = self.jwe.update(
            recipients=(self.jwe.recipients[0].update(encrypted_key=b''),),
            iv=b'', tag=b'')
        assert jwe.to_compact() == PROTECTED_B64 + '...VGVzdENpcGhlclRleHQ.'

    def test_compact_round_trip(self):
        from joseutils.jwe import JWE
        compact = self.jwe.to_compact()
        jwe = JWE.from_compact(compact)
        assert jwe.protected == PROTECTED
        assert jwe.recipients[0].encrypted_key == b'TestKey'
        assert jwe.iv == b'TestIV'
        assert jwe.ciphertext == b'TestCipherText'
        assert jwe.tag == b'TestTag'
        assert jwe.to_compact() == compact

    def test_received_protected_header_kept(self):
        from joseutils.jwe import JWE
        for header in (b'{"enc":"A256GCM","alg":"A256KW"}',
                       b'{ "alg" : "A256KW", "enc" : "A256GCM" }'):
            compact = (jose.encode_b64jose(header) +
                       '.VGVzdEtleQ.VGVzdElW.VGVzdENpcGhlclRleHQ.VGVzdFRhZw')
            jwe = JWE.from_compact(compact)
            assert jwe.protected == {'alg': 'A256KW', 'enc': 'A256GCM'}
            assert jwe.to_compact() == compact
            assert jwe.to_json()['protected'] == jose.encode_b64jose(header)
            assert JWE.json_loads(jwe.json_dumps()).to_compact() == compact

    def test_new_protected_header_encoded(self):
        from joseutils.jwe import JWE
        received = JWE.from_compact(
            jose.encode_b64jose(b'{"enc":"A256GCM","alg":"A256KW"}') +
            '.VGVzdEtleQ.VGVzdElW.VGVzdENpcGhlclRleHQ.VGVzdFRhZw')
        jwe = received.update(protected=PROTECTED)
        assert jwe.protected_b64 == PROTECTED_B64
        assert received.update(protected=None).protected_b64 is None

    def test_protected_missing(self):
        with pytest.raises(errors.ProtectedHeaderMissingError) as error:
            self.jwe.update(protected=None).to_compact()
        assert str(error.value) == \
            'unable to compact serialize: no protected header found'

    def test_no_recipients(self):
        with pytest.raises(errors.NotSoleRecipientError) as error:
            self.jwe.update(recipients=()).to_compact()
        assert error.value.count == 0

    def test_multiple_recipients(self):
        from joseutils.jwe import Recipient
        recipients = self.jwe.recipients + (Recipient(encrypted_key=b'TestKey2'),)
        with pytest.raises(errors.NotSoleRecipientError) as error:
            self.jwe.update(recipients=recipients).to_compact()
        assert error.value.count == 2
        assert str(error.value) == (
            'unable to compact serialize: JWE compact serialization only '
            'supports JWE with exactly one single recipient')

    def test_unprotected(self):
        with pytest.raises(errors.UnprotectedHeaderUnsupportedError):
            self.jwe.update(unprotected=UNPROTECTED).to_compact()

    def test_empty_unprotected(self):
        with pytest.raises(errors.UnprotectedHeaderUnsupportedError):
            self.jwe.update(unprotected={}).to_compact()

    def test_aad(self):
        with pytest.raises(errors.AADUnsupportedError):
            self.jwe.update(aad=b'TestAAD').to_compact()

    def test_recipient_header(self):
        from joseutils.jwe import RecipientHeaders
        recipient = self.jwe.recipients[0].update(
            header=RecipientHeaders(kid='TestKID'))
        with pytest.raises(errors.PerRecipientHeaderUnsupportedError):
            self.jwe.update(recipients=(recipient,)).to_compact()

    def test_empty_ciphertext(self):
        with pytest.raises(errors.EmptyCiphertextError):
            self.jwe.update(ciphertext=b'').to_compact()

    def test_check_order(self):
        jwe = self.jwe.update(protected=None, recipients=(), aad=b'TestAAD')
        with pytest.raises(errors.ProtectedHeaderMissingError):
            jwe.to_compact()
        with pytest.raises(errors.NotSoleRecipientError):
            jwe.update(protected=PROTECTED).to_compact()

    def test_from_compact_wrong_segment_count(self):
        from joseutils.jwe import JWE
        for compact in ('a.b.c.d', 'a.b.c.d.e.f', '', self.jwe.to_compact() + '.'):
            with pytest.raises(errors.MalformedTokenError) as error:
                JWE.from_compact(compact)
            assert error.value.expected == 5

    def test_from_compact_invalid_segment(self):
        from joseutils.jwe import JWE
        with pytest.raises(jose.DeserializationError):
            JWE.from_compact(PROTECTED_B64 + '.VGVzdEtleQ==.VGVzdElW.e30.VGVzdFRhZw')

    def test_from_compact_invalid_protected(self):
        from joseutils.jwe import JWE
        for protected in (b'[]', b'nope'):
            with pytest.raises(jose.DeserializationError):
                JWE.from_compact(jose.encode_b64jose(protected) + '.a.b.c.d')


class JWEJSONTest(unittest.TestCase):
    """Tests for joseutils.jwe.JWE JSON serialization."""

    def setUp(self):
        from joseutils.jwe import JWE
        from joseutils.jwe import Recipient
        from joseutils.jwe import RecipientHeaders
        self.recipient1 = Recipient(
            encrypted_key=b'TestKey',
            header=RecipientHeaders(apu='TestAPU', iv='TestIV', tag='TestTag',
                                    kid='TestKID', epk=dict(EPK)))
        self.recipient2 = Recipient(
            encrypted_key=b'TestKey2',
            header=RecipientHeaders(apu='TestAPU2', iv='TestIV2', tag='TestTag2',
                                    kid='TestKID2', epk=dict(EPK)))
        self.jwe = JWE(
            protected=PROTECTED, unprotected=UNPROTECTED,
            recipients=(self.recipient1, self.recipient2),
            aad=b'TestAAD', iv=b'TestIV', ciphertext=b'TestCipherText',
            tag=b'TestTag')

    def test_multiple_recipients(self):
        assert _dumps(self.jwe) == (
            '{"protected":"' + PROTECTED_B64 + '",'
            '"unprotected":' + UNPROTECTED_JSON + ','
            '"recipients":['
            '{"header":{"apu":"TestAPU","iv":"TestIV","tag":"TestTag",'
            '"kid":"TestKID","epk":' + EPK_JSON + '},"encrypted_key":"VGVzdEtleQ"},'
            '{"header":{"apu":"TestAPU2","iv":"TestIV2","tag":"TestTag2",'
            '"kid":"TestKID2","epk":' + EPK_JSON + '},"encrypted_key":"VGVzdEtleTI"}],'
            '"aad":"VGVzdEFBRA","iv":"VGVzdElW",'
            '"ciphertext":"VGVzdENpcGhlclRleHQ","tag":"VGVzdFRhZw"}')

    def test_one_recipient_flattened(self):
        jwe = self.jwe.update(recipients=(self.recipient1,))
        assert _dumps(jwe) == (
            '{"protected":"' + PROTECTED_B64 + '",'
            '"unprotected":' + UNPROTECTED_JSON + ','
            '"encrypted_key":"VGVzdEtleQ",'
            '"header":{"apu":"TestAPU","iv":"TestIV","tag":"TestTag",'
            '"kid":"TestKID","epk":' + EPK_JSON + '},'
            '"aad":"VGVzdEFBRA","iv":"VGVzdElW",'
            '"ciphertext":"VGVzdENpcGhlclRleHQ","tag":"VGVzdFRhZw"}')

    def test_no_recipients(self):
        jwe = self.jwe.update(recipients=())
        jobj = jwe.to_json()
        assert jobj['recipients'] == [{}]
        assert 'encrypted_key' not in jobj
        assert 'header' not in jobj

    def test_minimal(self):
        from joseutils.jwe import JWE
        jwe = JWE(ciphertext=b'TestCipherText')
        assert _dumps(jwe) == '{"recipients":[{}],"ciphertext":"VGVzdENpcGhlclRleHQ"}'

    def test_one_recipient_without_header_or_key(self):
        from joseutils.jwe import JWE
        from joseutils.jwe import Recipient
        jwe = self.jwe.update(recipients=(Recipient(),))
        jobj = jwe.to_json()
        assert 'recipients' not in jobj
        assert jobj['encrypted_key'] == ''
        assert 'header' not in jobj
        assert JWE.json_loads(jwe.json_dumps()) == jwe

    def test_direct_encryption_round_trip(self):
        from joseutils.jwe import JWE
        from joseutils.jwe import Recipient
        jwe = JWE(protected={'alg': 'dir', 'enc': 'A256GCM'},
                  recipients=(Recipient(),), iv=b'TestIV',
                  ciphertext=b'TestCipherText', tag=b'TestTag')
        parsed = JWE.json_loads(jwe.json_dumps())
        assert parsed.recipients == (Recipient(),)
        assert parsed.to_compact() == jwe.to_compact()
        assert parsed.to_compact().split('.')[1] == ''

    def test_empty_ciphertext(self):
        with pytest.raises(errors.EmptyCiphertextError) as error:
            self.jwe.update(ciphertext=b'').to_json()
        assert str(error.value) == 'ciphertext cannot be empty'

    def test_json_round_trip(self):
        from joseutils.jwe import JWE
        for recipients in ((), (self.recipient1,),
                           (self.recipient1, self.recipient2)):
            jwe = self.jwe.update(recipients=recipients)
            assert JWE.json_loads(jwe.json_dumps()) == jwe

    def test_json_dumps_pretty(self):
        from joseutils.jwe import JWE
        assert JWE.json_loads(self.jwe.json_dumps_pretty()) == self.jwe

    def test_from_json_flat_mixed(self):
        from joseutils.jwe import JWE
        jobj = self.jwe.update(recipients=(self.recipient1,)).to_json()
        jobj['recipients'] = [{}]
        with pytest.raises(jose.DeserializationError):
            JWE.from_json(jobj)

    def test_from_json_missing_ciphertext(self):
        from joseutils.jwe import JWE
        with pytest.raises(jose.DeserializationError):
            JWE.from_json({'protected': PROTECTED_B64, 'recipients': [{}]})

    def test_from_json_not_object(self):
        from joseutils.jwe import JWE
        for jobj in ([], 'jwe', None):
            with pytest.raises(jose.DeserializationError):
                JWE.from_json(jobj)

    def test_from_json_recipients_not_array(self):
        from joseutils.jwe import JWE
        with pytest.raises(jose.DeserializationError):
            JWE.from_json({'recipients': {}, 'ciphertext': 'VGVzdA'})

    def test_from_json_invalid_base64(self):
        from joseutils.jwe import JWE
        with pytest.raises(jose.DeserializationError):
            JWE.from_json({'ciphertext': 'VGVzdA=='})

    def test_from_json_epk_not_object(self):
        from joseutils.jwe import JWE
        with pytest.raises(jose.DeserializationError):
            JWE.from_json({'header': {'epk': 'key'}, 'ciphertext': 'VGVzdA'})

    def test_flattened_to_compact(self):
        from joseutils.jwe import JWE
        from joseutils.jwe import Recipient
        jwe = JWE.from_json({
            'protected': PROTECTED_B64,
            'encrypted_key': 'VGVzdEtleQ',
            'iv': 'VGVzdElW',
            'ciphertext': 'VGVzdENpcGhlclRleHQ',
            'tag': 'VGVzdFRhZw',
        })
        assert jwe.recipients == (Recipient(encrypted_key=b'TestKey'),)
        assert jwe.to_compact() == (
            PROTECTED_B64 + '.VGVzdEtleQ.VGVzdElW.VGVzdENpcGhlclRleHQ.VGVzdFRhZw')


class JWEEncryptionTest(unittest.TestCase):
    """A256KW + A256GCM content survives both serializations."""

    def setUp(self):
        self.kek = os.urandom(32)
        self.plaintext = b'{"sub":"subjectID","nonce":"n-0S6_WzA2Mj"}'

    def _encrypt(self, protected):
        from joseutils.jwe import JWE
        from joseutils.jwe import Recipient
        from joseutils.jwe import RecipientHeaders
        aad = JWE(protected=protected, ciphertext=b'x').encode(
            'protected').encode('ascii')
        encrypted_key, iv, ciphertext, tag = test_util.encrypt_a256kw_a256gcm(
            self.plaintext, self.kek, aad)
        return JWE(protected=protected,
                   recipients=(Recipient(encrypted_key=encrypted_key),),
                   iv=iv, ciphertext=ciphertext, tag=tag), aad

    def test_compact(self):
        from joseutils.jwe import JWE
        jwe, aad = self._encrypt({'alg': 'A256KW', 'enc': 'A256GCM',
                                  'kid': 'did:example:123#key-1'})
        compact = jwe.to_compact()
        assert compact.split('.')[0] == aad.decode('ascii')

        parsed = JWE.from_compact(compact)
        assert parsed.protected.algorithm() == 'A256KW'
        assert parsed.protected.encryption() == 'A256GCM'
        assert parsed.protected.key_id() == 'did:example:123#key-1'
        assert test_util.decrypt_a256kw_a256gcm(
            parsed.recipients[0].encrypted_key, parsed.iv, parsed.ciphertext,
            parsed.tag, self.kek, aad) == self.plaintext

    def test_received_header_decrypts(self):
        from joseutils.jwe import JWE
        protected_b64 = jose.encode_b64jose(b'{"enc":"A256GCM", "alg":"A256KW"}')
        aad = protected_b64.encode('ascii')
        encrypted_key, iv, ciphertext, tag = test_util.encrypt_a256kw_a256gcm(
            self.plaintext, self.kek, aad)
        compact = '.'.join([protected_b64] + [
            jose.encode_b64jose(value) for value in (encrypted_key, iv, ciphertext, tag)])

        for parsed in (JWE.from_compact(compact),
                       JWE.json_loads(JWE.from_compact(compact).json_dumps())):
            assert test_util.decrypt_a256kw_a256gcm(
                parsed.recipients[0].encrypted_key, parsed.iv, parsed.ciphertext,
                parsed.tag, self.kek, parsed.protected_b64.encode('ascii')) == \
                self.plaintext

    def test_flattened_json(self):
        from joseutils.jwe import JWE
        jwe, aad = self._encrypt({'alg': 'A256KW', 'enc': 'A256GCM'})
        parsed = JWE.json_loads(jwe.json_dumps())
        assert parsed.protected_b64.encode('ascii') == aad
        assert test_util.decrypt_a256kw_a256gcm(
            parsed.recipients[0].encrypted_key, parsed.iv, parsed.ciphertext,
            parsed.tag, self.kek, aad) == self.plaintext


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
