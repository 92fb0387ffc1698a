from pyVim.connect import SmartConnect, Disconnect
from pyVmomi import vim, vmodl
import requests
import ssl
import atexit
import logging

from constants import REST_SESSION_PATH, REST_SESSION_HEADER, REQUEST_TIMEOUT, VM_MOREF_PREFIX

logger = logging.getLogger('vmdatasets.vcenter')


class VCenter:
    def __init__(self, host, user, password, port=443, disable_ssl_verification=False):
        self.host = host
        self.user = user
        self.password = password
        self.port = port
        self.connection = None
        self.rest_session = None
        self.logger = logger
        self.disable_ssl_verification = disable_ssl_verification

    @property
    def api_url(self):
        """Base URL of the vSphere Automation REST endpoint."""
        return f"https://{self.host}:{self.port}"

    def connect(self):
        """Establishes the SOAP (pyVmomi) and REST sessions to the vCenter server."""
        try:
            ssl_context = None
            if self.disable_ssl_verification:
                self.logger.warning(
                    f"Attempting to connect to vCenter {self.host} with SSL certificate verification DISABLED. "
                    "This is insecure and should only be used in trusted environments."
                )
                ssl_context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                ssl_context.check_hostname = False
                ssl_context.verify_mode = ssl.CERT_NONE

            self.connection = SmartConnect(host=self.host,
                                           user=self.user,
                                           pwd=self.password,
                                           port=self.port,
                                           sslContext=ssl_context)

            if self.connection:
                atexit.register(Disconnect, self.connection)
                self.logger.info(f"Successfully connected to vCenter server: {self.host}")
            else:
                self.logger.error(f"SmartConnect returned None for vCenter: {self.host}. Connection failed.")
                return

            self.rest_session = self.create_rest_session()
            atexit.register(self.close_rest_session)

        except ssl.SSLCertVerificationError as ssl_verify_error:
            self.logger.error(
                f"SSL Certificate Verification Error connecting to vCenter {self.host}: {ssl_verify_error}. "
                "Consider using --insecure if this is a trusted environment with a self-signed certificate, "
                "or ensure the vCenter certificate is trusted by the system."
            )
            self.connection = None
        except vim.fault.InvalidLogin as e:
            self.logger.error(f"Invalid login credentials for vCenter {self.host}: {e.msg}")
            self.connection = None
        except ConnectionRefusedError as e:
            self.logger.error(f"Connection refused by vCenter {self.host}:{self.port}. Ensure vCenter is reachable and the service is running. Error: {e}")
            self.connection = None
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Failed to open REST API session on vCenter {self.host}: {e}")
            self.rest_session = None
        except Exception as e:
            self.logger.error(f"Failed to connect to vCenter {self.host}: {e}", exc_info=True)
            self.connection = None

    def create_rest_session(self):
        """
        Logs in to the vSphere Automation API and returns a requests session
        carrying the session token header.
        """
        session = requests.Session()
        session.verify = not self.disable_ssl_verification
        response = session.post(self.api_url + REST_SESSION_PATH,
                                auth=(self.user, self.password), timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        session.headers[REST_SESSION_HEADER] = response.json()
        self.logger.debug(f"REST API session established on {self.host}")
        return session

    def close_rest_session(self):
        """Logs out of the REST API session, if one is open."""
        if self.rest_session is None:
            return
        try:
            self.rest_session.delete(self.api_url + REST_SESSION_PATH, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            self.logger.debug(f"Ignoring error while closing REST session on {self.host}: {e}")
        finally:
            self.rest_session.close()
            self.rest_session = None

    def is_connected(self):
        """Checks if both the SOAP service instance and the REST session are available."""
        if self.connection is None or self.rest_session is None:
            return False
        try:
            return self.connection.content.sessionManager.currentSession is not None
        except vim.fault.NotAuthenticated:
            self.logger.warning(f"vCenter session on {self.host} is no longer authenticated.")
            return False

    def get_content(self):
        """Retrieves the service content from vCenter."""
        return self.connection.RetrieveContent()

    def get_obj(self, vimtype, name):
        """
        Retrieves an object by name from vCenter using the property collector.
        """
        content = self.get_content()
        try:
            container = content.viewManager.CreateContainerView(content.rootFolder, vimtype, True)
            property_spec = vmodl.query.PropertyCollector.PropertySpec(type=vimtype[0], pathSet=["name"], all=False)
            traversal_spec = vmodl.query.PropertyCollector.TraversalSpec(name='traverseEntities', path='view', skip=False, type=vim.view.ContainerView)
            object_spec = vmodl.query.PropertyCollector.ObjectSpec(obj=container, skip=True, selectSet=[traversal_spec])
            filter_spec = vmodl.query.PropertyCollector.FilterSpec(objectSet=[object_spec], propSet=[property_spec])

            collector = content.propertyCollector
            props = collector.RetrieveContents([filter_spec])

            for obj in props:
                if obj.propSet[0].val == name:
                    return obj.obj
        finally:
            if 'container' in locals():
                container.Destroy()

        return None

    def get_vm_moref(self, vm):
        """
        Returns the managed object id ('vm-26') for a VM given either its id or its name.

        :param vm: A managed object id or the name of a virtual machine.
        :return: The managed object id, or None if no VM with that name exists.
        """
        if vm.startswith(VM_MOREF_PREFIX) and vm[len(VM_MOREF_PREFIX):].isdigit():
            return vm
        try:
            vm_obj = self.get_obj([vim.VirtualMachine], vm)
        except vmodl.MethodFault as e:
            self.logger.error(f"Failed to look up VM '{vm}': {self.extract_error_message(e)}")
            return None
        if vm_obj is None:
            return None
        return vm_obj._moId

    def extract_error_message(self, exception):
        """
        Extracts a detailed error message from a vSphere API exception or falls back to the default string
        representation of the exception.
        """
        if getattr(exception, 'localizedMessage', None):
            return exception.localizedMessage
        if getattr(exception, 'msg', None):
            return exception.msg
        if getattr(exception, 'reason', None):
            return str(exception.reason)
        if getattr(exception, 'faultCause', None):
            return f"Fault cause: {exception.faultCause}"
        return str(exception)
